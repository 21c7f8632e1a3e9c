class WeightConverter:
    """Utility for converting between kg and lb."""

    KG_TO_LB = 2.20462

    @staticmethod
    def kg_to_lb(kg: float) -> float:
        return round(kg * WeightConverter.KG_TO_LB, 2)


class DistanceConverter:
    """Utility for converting between km and miles."""

    KM_TO_MILE = 0.621371

    @staticmethod
    def km_to_mile(km: float) -> float:
        return round(km * DistanceConverter.KM_TO_MILE, 2)
