from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

# Les clients parlent en camelCase (dueDate, newPassword...)

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ApiResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
