"""Pydantic schema for the all-projects dashboard"""
from pydantic import BaseModel, ConfigDict, computed_field


class DashboardRow(BaseModel):
    """
    Per-project summary computed from the report history.

    Attributes:
        project_id: Project primary key
        project_name: Project name
        newest_fetchhead: Commit of the most recently accepted report with a commit, "" if none
        newest_ctime: Acceptance time of that report
        finished: Reports built against newest_fetchhead
        success: Finished reports that reached distcheck
        pending: Reports built against any other commit
    """

    project_id: int
    project_name: str
    newest_fetchhead: str
    newest_ctime: int
    finished: int
    success: int
    pending: int

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def success_rate(self) -> int:
        if self.finished == 0:
            return 0
        return 100 * self.success // self.finished

    @computed_field
    @property
    def finished_rate(self) -> int:
        # A row exists only because some report referenced the project
        return 100 * self.finished // (self.finished + self.pending)

    @computed_field
    @property
    def passed(self) -> bool:
        return self.success == self.finished
