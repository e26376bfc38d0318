class WeightConverter:
    """Convert logged weights between kilograms and pounds."""

    KG_TO_LB = 2.20462

    UNIT_ALIASES = {
        "kg": "kg",
        "kgs": "kg",
        "kilogram": "kg",
        "kilograms": "kg",
        "lb": "lb",
        "lbs": "lb",
        "pound": "lb",
        "pounds": "lb",
    }

    @staticmethod
    def kg_to_lb(kg: float) -> float:
        return round(kg * WeightConverter.KG_TO_LB, 2)

    @staticmethod
    def lb_to_kg(lb: float) -> float:
        return round(lb / WeightConverter.KG_TO_LB, 2)

    @classmethod
    def normalize_unit(cls, unit: str) -> str:
        try:
            return cls.UNIT_ALIASES[unit.strip().lower()]
        except KeyError:
            raise ValueError(f"unknown weight unit: {unit}") from None

    @classmethod
    def convert(cls, weight: float, from_unit: str, to_unit: str) -> float:
        src = cls.normalize_unit(from_unit)
        dst = cls.normalize_unit(to_unit)
        if src == dst:
            return float(weight)
        if src == "kg":
            return cls.kg_to_lb(weight)
        return cls.lb_to_kg(weight)
