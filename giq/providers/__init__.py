from .base import BACKENDS, DEFAULT_PROVIDER, Backend, Field, backend_choices, get_backend, register
from .openai_provider import OPENAI
from .azure_provider import AZURE_OPENAI

__all__ = [
    "BACKENDS",
    "DEFAULT_PROVIDER",
    "Backend",
    "Field",
    "backend_choices",
    "get_backend",
    "register",
    "OPENAI",
    "AZURE_OPENAI",
]
