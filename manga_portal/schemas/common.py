from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Базовая схема с camelCase-ключами (``totalVotes``, ``coverImage``),
    принимающая также snake_case-имена полей и ORM-объекты.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
