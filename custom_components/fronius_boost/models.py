"""Shapes of the JSON documents served by the Fronius web API."""

from __future__ import annotations

from typing import Any, Generic, TypedDict, TypeVar

T = TypeVar("T")


class FroniusStatus(TypedDict, total=False):
    Code: int
    Reason: str
    UserMessage: str
    ErrorDetail: dict[str, Any]


class FroniusHead(TypedDict, total=False):
    Note: str
    RequestArguments: list[Any]
    Status: FroniusStatus
    Timestamp: str


class FroniusBody(TypedDict, Generic[T]):
    Data: T


class FroniusJson(TypedDict, Generic[T]):
    """Envelope used by the status and config endpoints, not by aboutSystem."""

    Body: FroniusBody[T]
    Head: FroniusHead


class EmrsPinStatus(TypedDict):
    reason: str
    state: bool


class EmrsGpios(TypedDict, total=False):
    gpios: dict[str, EmrsPinStatus]


class EmrsStatus(TypedDict):
    emrs: EmrsGpios


class EmrsPinConfig(TypedDict, total=False):
    ScheduleOnDone: bool
    ScheduleOnTime: str
    label: str
    maxTimeOn: int
    minTimeOn: int
    mode: str
    """either ppv (photovoltaic surplus) or pgrid (grid feed)"""
    requiredTimeOn: int
    supply_from_battery: bool
    thresholdOff: float
    thresholdOn: float


class EmrsPriorities(TypedDict, total=False):
    batteries: int
    ios: int
    ohmpilots: int
    supply_ohmpilots_from_battery: int


class EmrsRules(TypedDict, total=False):
    priorities: EmrsPriorities
    rules: dict[str, EmrsPinConfig]


class EmrsConfig(TypedDict):
    emrs: EmrsRules


class AboutLeds(TypedDict, total=False):
    power: str
    localnet: str
    solarweb: str
    wlan: str


class AboutSystem(TypedDict, total=False):
    txtDaloId: str
    txtDnsEnum: str
    txtGateway: str
    txtHwVersion: str
    txtLanIp: str
    txtLanMac: str
    txtLanNetmask: str
    txtSwVersion: str
    txtSystemTime: str
    txtUptime: str
    txtWlanIp: str
    txtWlanMac: str
    txtWlanNetmask: str
    leds: AboutLeds
