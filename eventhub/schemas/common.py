# eventhub/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Base for every record and request body.

    Attributes are snake_case in Python and camelCase on the wire
    (``start_date`` <-> ``startDate``); either spelling is accepted as input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
