# ============================================================================
# FILE: videotube/core/responses.py
# ============================================================================
from typing import Any
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Success envelope shared by every endpoint"""
    status_code: int = 200
    data: Any = None
    message: str = "Success"

    @property
    def success(self) -> bool:
        return self.status_code < 400

    def to_dict(self) -> dict:
        return {
            "statusCode": self.status_code,
            "data": jsonable_encoder(self.data, by_alias=True),
            "message": self.message,
            "success": self.success,
        }


def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    envelope = ApiResponse(status_code=status_code, data=data, message=message)
    return JSONResponse(status_code=status_code, content=envelope.to_dict())
