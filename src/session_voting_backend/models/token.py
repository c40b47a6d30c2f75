'''

'''
from pydantic import BaseModel
from datetime import datetime

class Token(BaseModel):
    access_token: str
    token_type: str
    username: str

class TokenPayload(BaseModel):
    sub: str # 'sub' is standard JWT claim for subject (the voter name)
    exp: datetime
