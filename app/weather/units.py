from app.types import Temperature


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 1.8 + 32


def celsius_to_kelvin(temp_c: float) -> float:
    return temp_c + 273.15


def convert_celsius(temp_c: float) -> Temperature:
    """
    Derive all three scales from one Celsius reading so they always agree.
    """
    temp_c = float(temp_c)
    return Temperature(
        temp_C=temp_c,
        temp_F=celsius_to_fahrenheit(temp_c),
        temp_K=celsius_to_kelvin(temp_c),
    )
