# lesionlog/services/result_service.py
from ..repositories.result_repository import ResultRepository
from ..repositories.user_repository import UserRepository
from ..utils.exceptions import NotFoundError, ValidationError
from ..utils.logger import setup_logger
from ..utils.params import day_bounds, pagination_dict

def validate_result(confidence, prediction):
    """Normalized (confidence, prediction) or ValidationError"""
    if confidence is None or confidence == '' or prediction is None:
        raise ValidationError("Confidence and prediction are required.")
    if isinstance(confidence, bool):
        raise ValidationError("Confidence must be a number.")
    try:
        confidence = float(confidence)
    except (TypeError, ValueError):
        raise ValidationError("Confidence must be a number.")
    if not 0 <= confidence <= 100:
        raise ValidationError("Confidence must be between 0 and 100.")
    if not isinstance(prediction, str) or not prediction.strip():
        raise ValidationError("Prediction must be a non-empty string.")
    return confidence, prediction.strip()

class ResultService:
    def __init__(self):
        self.repository = ResultRepository()
        self.user_repository = UserRepository()
        self.logger = setup_logger()

    def create(self, confidence, prediction, owner_id):
        """Service: Validate and store a prediction result"""
        confidence, prediction = validate_result(confidence, prediction)
        result = self.repository.create_result(confidence, prediction, owner_id)
        self.logger.info(f"Service: Result {result.id} ({prediction}, {confidence}) saved for user ID {owner_id}")
        return result.to_dict()

    def _page(self, pagination):
        return {
            "data": [result.to_dict() for result in pagination.items],
            "pagination": pagination_dict(pagination)
        }

    def list_by_owner(self, owner_id, page, page_size):
        return self._page(self.repository.paginate(page, page_size, user_id=owner_id))

    def list_all(self, page, page_size):
        return self._page(self.repository.paginate(page, page_size))

    def list_by_owner_id(self, target_id):
        """Service: Every result of one user, for admins"""
        if target_id is None:
            raise ValidationError("User ID is required.")
        if not self.user_repository.get_user_by_id(target_id):
            raise NotFoundError("User not found.")
        results = self.repository.list_results(user_id=target_id)
        return {"count": len(results), "data": [result.to_dict() for result in results]}

    def list_by_prediction_substring(self, pattern, page, page_size):
        if not pattern or not pattern.strip():
            raise ValidationError("Prediction text is required.")
        return self._page(self.repository.paginate(page, page_size, prediction_contains=pattern.strip()))

    def list_by_date_range(self, start_date, end_date, page, page_size):
        start, end = day_bounds(start_date, end_date)
        return self._page(self.repository.paginate(page, page_size, start=start, end=end))
