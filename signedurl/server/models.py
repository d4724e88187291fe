"""Request and response bodies for the signing API."""

from dataclasses import dataclass, field

from mashumaro import field_options
from mashumaro.config import TO_DICT_ADD_OMIT_NONE_FLAG, BaseConfig
from mashumaro.mixins.json import DataClassJSONMixin


@dataclass
class SignUrlRequest(DataClassJSONMixin):
    """Request to sign a path under the server's base URL."""

    path: str
    expires_in: int | None = field(
        metadata=field_options(alias="expiresIn"), default=None
    )

    class Config(BaseConfig):
        serialize_by_alias = True


@dataclass
class SignUrlResponse(DataClassJSONMixin):
    """Response carrying a signed URL or an error."""

    success: bool = True
    url: str | None = None
    error_msg: str | None = field(
        metadata=field_options(alias="errorMsg"), default=None
    )

    class Config(BaseConfig):
        serialize_by_alias = True
        omit_none = True
        code_generation_options = [TO_DICT_ADD_OMIT_NONE_FLAG]


def create_error_response(error_msg: str) -> SignUrlResponse:
    return SignUrlResponse(success=False, error_msg=error_msg)
