from .config import Config
from .engine import Ccmash
from .epochs import get_seedhash
from .full import Full, full_compute, full_dag, full_dag_size, full_delete, full_new
from .hashimoto import ReturnValue
from .light import Light, light_compute, light_delete, light_new

__all__ = [
    "get_seedhash",
    "light_new",
    "light_compute",
    "light_delete",
    "full_new",
    "full_compute",
    "full_dag",
    "full_dag_size",
    "full_delete",
    "ReturnValue",
    "Light",
    "Full",
    "Ccmash",
    "Config",
]
