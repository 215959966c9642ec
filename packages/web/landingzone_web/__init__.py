"""Landing Zone Web: FastAPI backend for cost estimates and presales submissions."""

__version__ = "0.3.1"


def __getattr__(name: str):
    if name == "app":
        from landingzone_web.app import app

        return app
    raise AttributeError(f"module 'landingzone_web' has no attribute {name!r}")
