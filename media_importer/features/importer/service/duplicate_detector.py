from media_importer.features.storage.domain.interfaces import IMediaRepository
from ..domain.models import DestinationPlan

class DuplicateDetector:
    """
    Checks whether a planned file is already registered.

    Both the path under the original basename and the collision-free
    path are looked up: on a re-run the original name is occupied by the
    earlier import, so the planned name alone would carry a suffix.
    Records also remember the path they were planned under before
    numbering, which catches files that were numbered on import because
    something else already held their name.
    """

    def __init__(self, repository: IMediaRepository):
        self.repository = repository

    def exists(self, plan: DestinationPlan) -> bool:
        for stored_path in dict.fromkeys((plan.candidate_stored_path, plan.relative_stored_path)):
            if self.repository.find_by_stored_path(stored_path) is not None:
                return True
        return self.repository.find_by_source_path(plan.candidate_stored_path) is not None
