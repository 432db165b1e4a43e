from pydantic import BaseModel, ConfigDict


class MistralBase(BaseModel):
    r"""Base class for the pydantic models of the Mistral chat task.

    Forbids extra attributes, validates default values and stores enum values.
    """

    model_config = ConfigDict(extra="forbid", validate_default=True, use_enum_values=True)
