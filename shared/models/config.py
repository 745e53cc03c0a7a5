from typing import Literal

from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    A single environment setting a client or store needs before it can boot.

    Attributes:
        env_key (str): The raw key, without the "<TYPE>_<ENGINE>_" prefix the owner adds.
        val_type (str): How the value is parsed: "string", "number", "bool" or "list".
        default: Value used when the variable is unset. None marks the setting as required.
    """

    env_key: str
    val_type: Literal["string", "number", "bool", "list"] = "string"
    default: str | int | float | bool | list | None = None
