from .models import OCMConfig
from .store import ConfigStore, load_ocm_config

__all__ = ["OCMConfig", "ConfigStore", "load_ocm_config"]
