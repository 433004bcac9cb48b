from pydantic import BaseModel


class EmergencyService(BaseModel):
    name: str
    type: str


class Weather(BaseModel):
    visibility: float  # km
    weather: str
    description: str
    temperature: float
    humidity: int
    wind_speed: float
    timestamp: str
