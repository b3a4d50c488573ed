"""
Command and result types exchanged with a pocket VNA.

Every message shares the :class:`Command` envelope (``id``, ``t``, ``cmd``).
Each concrete variant adds its own fields and knows how to build itself from
a decoded JSON object and how to lay itself out for encoding. Field order in
:meth:`to_payload` is the order the peer expects on the wire, and every field
is type-checked there, raising :class:`SerializationError` on a mismatch.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Union

from pocketstream.pocket.fields import (
    check_bool,
    check_complex,
    check_int,
    check_payload,
    check_str,
    read_bool,
    read_float,
    read_int,
    read_object,
    read_str,
)


@dataclass
class Command:
    """Envelope common to every command and result.

    Attributes:
        id: Session or client identifier.
        t: Timestamp.
        cmd: Tag selecting the variant; defaults to the variant's own tag.
    """

    tag: ClassVar[str] = ""

    id: str = ""
    t: int = 0
    cmd: str = ""

    def __post_init__(self) -> None:
        if not self.cmd:
            self.cmd = self.tag

    def to_payload(self) -> Dict[str, Any]:
        """Lay out the envelope fields in wire order."""
        return {
            "id": check_str(self.id, "id"),
            "t": check_int(self.t, "t"),
            "cmd": check_str(self.cmd, "cmd"),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Command":
        """Build the command from a decoded JSON object."""
        return cls(**cls.envelope_fields(payload))

    @staticmethod
    def envelope_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Read the envelope fields of a decoded message."""
        return {
            "id": read_str(payload, "id"),
            "t": read_int(payload, "t"),
            "cmd": read_str(payload, "cmd"),
        }


@dataclass
class Range:
    """Frequency bounds in Hz."""

    start: int = 0
    end: int = 0

    def to_payload(self) -> Dict[str, Any]:
        return {"Start": check_int(self.start, "Start"), "End": check_int(self.end, "End")}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Range":
        return cls(start=read_int(payload, "Start"), end=read_int(payload, "End"))


@dataclass
class SParamSelect:
    """Which of the four S-parameters a measurement should cover."""

    s11: bool = False
    s12: bool = False
    s21: bool = False
    s22: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "S11": check_bool(self.s11, "S11"),
            "S12": check_bool(self.s12, "S12"),
            "S21": check_bool(self.s21, "S21"),
            "S22": check_bool(self.s22, "S22"),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SParamSelect":
        return cls(
            s11=read_bool(payload, "S11"),
            s12=read_bool(payload, "S12"),
            s21=read_bool(payload, "S21"),
            s22=read_bool(payload, "S22"),
        )


def _complex_payload(value: Any, key: str) -> Dict[str, Any]:
    value = check_complex(value, key)
    return {"Real": float(value.real), "Imag": float(value.imag)}


def _complex_from_payload(payload: Mapping[str, Any], key: str) -> complex:
    data = read_object(payload, key)
    return complex(read_float(data, "Real"), read_float(data, "Imag"))


@dataclass
class SParam:
    """Measured value of each S-parameter.

    All four are always carried, whether or not they were selected.
    """

    s11: complex = 0j
    s12: complex = 0j
    s21: complex = 0j
    s22: complex = 0j

    def to_payload(self) -> Dict[str, Any]:
        return {
            "S11": _complex_payload(self.s11, "S11"),
            "S12": _complex_payload(self.s12, "S12"),
            "S21": _complex_payload(self.s21, "S21"),
            "S22": _complex_payload(self.s22, "S22"),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SParam":
        return cls(
            s11=_complex_from_payload(payload, "S11"),
            s12=_complex_from_payload(payload, "S12"),
            s21=_complex_from_payload(payload, "S21"),
            s22=_complex_from_payload(payload, "S22"),
        )


@dataclass
class FrequencyRangeQuery(Command):
    """Ask for, or report, the frequency range the instrument can measure."""

    tag: ClassVar[str] = "rr"

    result: Range = field(default_factory=Range)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["range"] = check_payload(self.result, Range, "range")
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "FrequencyRangeQuery":
        return cls(
            **cls.envelope_fields(payload),
            result=Range.from_payload(read_object(payload, "range")),
        )


@dataclass
class SingleQuery(Command):
    """Measure the selected S-parameters at a single frequency."""

    tag: ClassVar[str] = "sq"

    freq: int = 0
    avg: int = 0
    select: SParamSelect = field(default_factory=SParamSelect)
    result: SParam = field(default_factory=SParam)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["freq"] = check_int(self.freq, "freq")
        payload["avg"] = check_int(self.avg, "avg")
        payload["sparam"] = check_payload(self.select, SParamSelect, "sparam")
        payload["result"] = check_payload(self.result, SParam, "result")
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SingleQuery":
        return cls(
            **cls.envelope_fields(payload),
            freq=read_int(payload, "freq"),
            avg=read_int(payload, "avg"),
            select=SParamSelect.from_payload(read_object(payload, "sparam")),
            result=SParam.from_payload(read_object(payload, "result")),
        )


CommandValue = Union[FrequencyRangeQuery, SingleQuery]
