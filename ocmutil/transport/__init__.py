from .connection import OCMConnection

__all__ = ["OCMConnection"]
