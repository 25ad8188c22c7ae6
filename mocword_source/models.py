"""Values exchanged with the host completion framework."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class InputContext(BaseModel):
    """What the host knows at completion time.

    input is the line (or buffer text) up to the cursor. It is the query
    sent to mocword when the tokenizer finds no word boundary.
    """

    model_config = ConfigDict(frozen=True)

    input: str = ""


class Candidate(BaseModel):
    """One completion: the verbatim preceding letters plus a predicted word."""

    model_config = ConfigDict(frozen=True)

    word: str
