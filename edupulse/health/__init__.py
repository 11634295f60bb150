from edupulse.health.router import router


__all__ = ["router"]
