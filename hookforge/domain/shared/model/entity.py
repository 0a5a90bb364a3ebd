from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """Base class for identity-bearing domain objects.

    Entities are mutable and re-validated on assignment, so a field update
    cannot leave the object in a state its validators would reject.
    """

    model_config = ConfigDict(validate_assignment=True)
