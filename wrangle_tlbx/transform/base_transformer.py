"""Base class for stateful transformation components."""

from abc import ABC, abstractmethod
from typing import Any


class BaseTransformer(ABC):
    """Abstract base class for transformations that are fitted before their results are read.

    All transformers must:
    1. Accept the data and all options in their constructor
    2. Implement fit() to perform the computation and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    Functional front-ends (e.g. :func:`~wrangle_tlbx.transform.demean.demean`) wrap a transformer:

    ```python
    def my_transform(frame, select, **options) -> pd.DataFrame:
        return MyTransformer(frame, select, **options).fit().result().data
    ```
    """

    _fitted: bool = False

    @abstractmethod
    def fit(self) -> "BaseTransformer":
        """Run the transformation.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return results as a frozen dataclass instance.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...

    def _require_fitted(self) -> None:
        if not self._fitted:
            raise ValueError("Call fit() first")
