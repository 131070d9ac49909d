from app.db import Base

__all__ = ["Base"]
