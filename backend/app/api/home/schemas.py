from app.core.response.base_model import CustomBaseModel


class HomeStats(CustomBaseModel):
    total_events: int
    total_ngos: int
    total_volunteers: int
