"""Client for the FriendForce contact relationship manager."""

__version__ = "0.1.0"
