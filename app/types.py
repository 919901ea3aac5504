from pydantic import BaseModel, ConfigDict, Field


class LookupRequest(BaseModel):
    """Body accepted by the input service."""

    model_config = ConfigDict(frozen=True)

    cep: str = Field(..., min_length=8)


class Temperature(BaseModel):
    model_config = ConfigDict(frozen=True)

    temp_C: float
    temp_F: float
    temp_K: float


class LookupResult(Temperature):
    """Answer of both services: resolved place plus its temperature."""

    city: str


# Upstream payloads

class ViaCepAddress(BaseModel):
    # ViaCEP answers {"erro": true} for unknown codes, so the locality may be missing
    model_config = ConfigDict(extra="ignore")

    localidade: str = ""


class CurrentConditions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # no bools, numeric strings, NaN or Infinity
    temp_c: float = Field(..., strict=True, allow_inf_nan=False)


class WeatherReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current: CurrentConditions
