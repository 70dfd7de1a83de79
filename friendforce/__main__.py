"""Run the FriendForce web client with uvicorn."""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "friendforce.main:app",
        host=os.getenv("FRIENDFORCE_HOST", "127.0.0.1"),
        port=int(os.getenv("FRIENDFORCE_PORT", "8080")),
    )


if __name__ == "__main__":
    main()
