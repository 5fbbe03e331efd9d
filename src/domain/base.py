from sqlmodel import SQLModel


class BaseModel(SQLModel):
    """Common base for persisted domain entities"""
    pass
