"""
Search command data model for the Project File Finder.

A search command is a pipeline of argument vectors. It is executed without a
shell; when a single shell string is needed (for display or for hosts that
only accept a command line) every token goes through ``quote_token``.
"""

import shlex
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import Strategy


def quote_token(token: str) -> str:
    """Quote one token so a POSIX shell parses it back to exactly ``token``."""
    return shlex.quote(token)


class SearchCommand(BaseModel):
    """
    A constructed project source search.

    Attributes:
        strategy: Accelerated (VCS grep) or fallback (find piped into grep)
        root: Directory the pipeline runs in
        query: The user's query, passed to the search stage as one argument
        stages: Argument vectors, stdout of each stage feeding the next
    """

    model_config = ConfigDict(frozen=True)

    strategy: Strategy = Field(..., description="Search strategy")
    root: str = Field(..., min_length=1, description="Working directory for the pipeline")
    query: str = Field(..., min_length=1, description="Search pattern")
    stages: List[List[str]] = Field(..., min_length=1, description="Pipeline argument vectors")

    @field_validator('stages')
    @classmethod
    def validate_stages(cls, v: List[List[str]]) -> List[List[str]]:
        for stage in v:
            if not stage:
                raise ValueError("Pipeline stages cannot be empty")
        return v

    @property
    def search_stage(self) -> List[str]:
        """The stage that receives the query."""
        return self.stages[-1]

    @property
    def pattern_argument(self) -> str:
        """The argument following ``-e`` in the search stage."""
        stage = self.search_stage
        index = stage.index('-e')
        return stage[index + 1]

    def to_shell(self) -> str:
        """Render the pipeline as one POSIX shell command line."""
        return " | ".join(
            " ".join(quote_token(token) for token in stage)
            for stage in self.stages
        )

    def __str__(self) -> str:
        return self.to_shell()
