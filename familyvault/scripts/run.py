"""Main entry point for the Family Vault API."""


def main() -> None:
    """Serve the API with uvicorn."""
    import os

    import uvicorn

    port = int(os.getenv("BIND_PORT", "7675"))
    host = os.getenv("BIND_HOST", "127.0.0.1")

    uvicorn.run("familyvault.main:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
