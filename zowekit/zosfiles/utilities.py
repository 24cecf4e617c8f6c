"""USS file tagging utilities."""

from enum import Enum
from typing import Any, Dict, Optional

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, expect_non_blank
from zowekit.zosfiles import messages
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.utils import uss_endpoint

ASCII_CODESETS = ("ISO8859-1", "UTF-8")


class Tag(str, Enum):
    TEXT = "text"
    BINARY = "binary"
    MIXED = "mixed"


class Utilities(ZosmfApi):
    def chtag(self, uss_path: str, tag: Tag, codeset: Optional[str] = None) -> ZosFilesResponse:
        """Set the file tag of a USS file."""
        expect_non_blank(uss_path, messages.MISSING_USS_FILE_NAME)
        try:
            tag = Tag(getattr(tag, "value", tag))
        except ValueError:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_TAG}") from None
        body: Dict[str, Any] = {"request": "chtag", "action": "set", "type": tag.value}
        if tag is Tag.BINARY:
            if codeset:
                raise ValidationError(f"{EXPECT_PREFIX}A codeset cannot be specified for a binary file.")
        else:
            expect_non_blank(codeset, messages.MISSING_CODESET)
            body["codeset"] = codeset
        self.logger.info("uss_chtag", extra=self.log_extra(path=uss_path, tag=tag.value, codeset=codeset))
        self.client.put_expect_json(uss_endpoint(uss_path), json_body=body)
        return ZosFilesResponse(True, messages.TAG_SET, body)

    def list_tag(self, uss_path: str) -> str:
        """Return the raw ``chtag -p`` line for a file (empty when untagged)."""
        expect_non_blank(uss_path, messages.MISSING_USS_FILE_NAME)
        data = self.client.put_expect_json(
            uss_endpoint(uss_path), json_body={"request": "chtag", "action": "list"}
        ) or {}
        stdout = data.get("stdout") if isinstance(data, dict) else None
        return stdout[0] if stdout else ""

    def is_file_tagged_binary_or_ascii(self, uss_path: str) -> bool:
        """
        True when the file should be transferred without EBCDIC conversion.

        That is the case for files tagged binary and for text files whose
        codeset is already ASCII based.
        """
        parts = self.list_tag(uss_path).split()
        if not parts:
            return False
        if parts[0] == "b" or parts[1:2] == ["binary"]:
            return True
        return parts[0] == "t" and len(parts) > 1 and parts[1] in ASCII_CODESETS
