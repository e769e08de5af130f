import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any


def rethrow[E: BaseException, NewE: BaseException](
    catch: type[E] | tuple[type[E], ...],
    into: Callable[[E], NewE],
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(fn):
            @wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await fn(*args, **kwargs)
                except catch as e:
                    raise into(e) from e

            return async_wrapper

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return fn(*args, **kwargs)
            except catch as e:
                raise into(e) from e

        return wrapper

    return decorator
