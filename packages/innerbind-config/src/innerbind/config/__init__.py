__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .loader import InnerbindConfig, config_from_dict, load_config_from_path

__all__ = ["InnerbindConfig", "config_from_dict", "load_config_from_path"]
