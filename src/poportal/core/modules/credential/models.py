from pydantic import BaseModel


class BasicCredentials(BaseModel):
    """Username and password decoded from a Basic authorization header."""

    username: str
    password: str
