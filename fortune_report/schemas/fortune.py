import calendar
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DOB_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{3}[0-9]{4}$")
MONTH_ABBREVIATIONS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN",
                       "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

Language = Literal["en", "zh"]


def normalize_dob(value: str) -> str:
    return value.strip().upper()


def is_valid_dob(dob: str) -> bool:
    """Strict DDMMMYYYY check, e.g. ``08DEC1977``; the day must exist in that month."""
    if not DOB_PATTERN.match(dob):
        return False
    day, month, year = int(dob[:2]), dob[2:5], int(dob[5:])
    if month not in MONTH_ABBREVIATIONS or year < 1:
        return False
    month_index = MONTH_ABBREVIATIONS.index(month) + 1
    return 1 <= day <= calendar.monthrange(year, month_index)[1]


class FortuneRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    dob: str = Field(..., description="出生日期，DDMMMYYYY 格式", examples=["08DEC1977"])
    language: Language = Field("en", description="报告语言：en 或 zh")

    @field_validator("dob", mode="before")
    @classmethod
    def dob_must_be_ddmmmyyyy(cls, v):
        if not isinstance(v, str):
            raise ValueError("dob must be a string")
        v = normalize_dob(v)
        if not v:
            raise ValueError("dob must not be empty")
        if not is_valid_dob(v):
            raise ValueError('dob must be DDMMMYYYY, e.g. "08DEC1977"')
        return v

    @field_validator("language", mode="before")
    @classmethod
    def collapse_language(cls, v):
        # 只有精确的 "zh" 才切换中文，其余一律按英文处理
        return "zh" if v == "zh" else "en"


class FortuneResponse(BaseModel):
    html: str


class ErrorResponse(BaseModel):
    error: str
