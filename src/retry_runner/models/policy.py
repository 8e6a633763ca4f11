"""
Effective retry policy for a single test.
"""

from pydantic import BaseModel, ConfigDict, Field

from retry_runner.models.enums import CountSource


class RetryPolicy(BaseModel):
    """
    Retry decision for one test at one point in time.
    
    Never cached across attempts: the budget gate depends on shared state
    that changes while other tests run.
    """
    model_config = ConfigDict(frozen=True)
    
    retry_count: int = Field(..., ge=1, description="Total attempts allowed (1 = no retries)")
    skip: bool = Field(default=False, description="Retries disabled by the skip predicate")
    budget_denied: bool = Field(default=False, description="Retries disabled by the global budget")
    nominal_count: int = Field(..., ge=1, description="Count before skip/budget gates")
    source: CountSource = Field(..., description="Where the nominal count came from")

    @property
    def allows_retry(self) -> bool:
        return self.retry_count > 1
