"""Utility modules for http-service."""

from .data_masker import MaskOptions, mask_object
from .dto import dto_to_plain, plain_to_dto
from .jwt_tools import decode_token, is_token_expired

__all__ = [
    "MaskOptions",
    "mask_object",
    "plain_to_dto",
    "dto_to_plain",
    "decode_token",
    "is_token_expired",
]
