"""モデル共通設定.

Python 側は snake_case、ワイヤー・永続化形式は camelCase。
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StorefrontModel(BaseModel):
    """camelCase エイリアス付き基底モデル."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict:
        """ワイヤー形式（camelCase、JSON 互換）の辞書に変換."""
        return self.model_dump(mode="json", by_alias=True)
