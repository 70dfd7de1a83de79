"""Pure derivations from cached entities into UI-ready collections."""
