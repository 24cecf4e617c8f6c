"""Run IDCAMS (Access Method Services) control statements."""

from pathlib import Path
from typing import Sequence, Union

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError
from zowekit.zosfiles import constants, messages
from zowekit.zosfiles.response import ZosFilesResponse


def read_statements(source: Union[str, Sequence[str], None]) -> list:
    """
    Normalize AMS input to a list of statements.

    A string is read as the path of a file holding one statement per line;
    blank lines are dropped.
    """
    if source is None or (isinstance(source, str) and not source.strip()):
        return []
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_INPUT_FILE} Not found: {source}")
        lines = path.read_text().splitlines()
    else:
        lines = list(source)
    return [line.rstrip() for line in lines if line and line.strip()]


class Invoke(ZosmfApi):
    def ams(self, statements: Union[str, Sequence[str], None]) -> ZosFilesResponse:
        """
        Submit AMS statements, given as a list or as a path to a file.

        Raises:
            ValidationError: No statements, or a statement longer than 255 characters
        """
        lines = read_statements(statements)
        if not lines:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_STATEMENTS}")
        for line in lines:
            if len(line) > constants.MAX_AMS_LINE:
                raise ValidationError(
                    EXPECT_PREFIX + messages.LONG_AMS_STATEMENT.format(max=constants.MAX_AMS_LINE, statement=line)
                )

        self.logger.info("ams_invoke", extra=self.log_extra(statements=len(lines)))
        data = self.client.put_expect_json(
            f"{constants.RESOURCE}{constants.RES_AMS}", json_body={"input": lines}
        )
        return ZosFilesResponse(True, messages.AMS_EXECUTED, data)
