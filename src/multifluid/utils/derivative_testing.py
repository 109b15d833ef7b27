"""Module containing functionality for testing the derivatives obtained by evaluating a
function with :class:`~multifluid.ad.forward_mode.AdArray` arguments."""

from __future__ import annotations

from typing import Callable

import numpy as np

from multifluid.ad.forward_mode import AdArray, initAdArrays

__all__ = [
    "value_and_gradient",
    "get_EOC_taylor",
    "assert_order_at_least",
]


def value_and_gradient(
    func: Callable[..., AdArray | float], x0: np.ndarray
) -> tuple[float, np.ndarray]:
    """Evaluate ``func`` at ``x0`` with AD arguments.

    Parameters:
        func: A function of ``x0.size`` scalar arguments.
        x0: The point of evaluation.

    Returns:
        The value of ``func`` and its gradient with respect to all arguments. If
        ``func`` does not depend on its arguments, the gradient is zero.

    """
    args = initAdArrays([float(x) for x in x0])
    res = func(*args)
    if isinstance(res, AdArray):
        return float(res.val), np.asarray(res.full_jac(), dtype=float)
    return float(res), np.zeros(x0.size)


def get_EOC_taylor(
    func: Callable[..., AdArray | float],
    x0: np.ndarray,
    d: np.ndarray,
    h: np.ndarray,
    tol: float = 1e-14,
) -> np.ndarray:
    """Estimate the order of convergence (EOC) of the AD derivative of ``func`` at
    point ``x0`` along direction ``d`` using Taylor expansion.

    The EOC is estimated by computing the error between the exact function value and
    the first-order Taylor approximation for a sequence of step sizes. A correct
    derivative gives second order.

    Parameters:
        func: Function for which the derivative is tested. It is called with floats
            for the exact values and with AdArrays for the derivative.
        x0: Point at which the derivative is computed.
        d: Direction along which the derivative is computed.
        h: Array of decreasing step sizes to use for the Taylor expansion.
        tol: Tolerance below which errors are considered zero
            (i.e., exact approximation).

    Returns:
        Estimated EOC values for each consecutive pair of step sizes.

    """
    # Norming direction for sensible scaling.
    d = d / np.linalg.norm(d)

    val0, grad0 = value_and_gradient(func, x0)

    errorlist = []
    for h_ in h:
        approx = val0 + h_ * (grad0 @ d)
        exact = float(func(*(x0 + h_ * d)))
        error = abs(exact - approx)
        # If errors are small, their ratios can falsely indicate order loss due to
        # floating point arithmetics.
        if error < tol:
            error = 0.0
        errorlist.append(error)

    errors = np.array(errorlist)

    h_ratios = h[1:] / h[:-1]

    error_ratios = np.full_like(errors[1:], np.nan)
    mask = errors[:-1] > tol
    error_ratios[mask] = errors[1:][mask] / errors[:-1][mask]

    orders = np.full_like(error_ratios, np.inf)
    finite_mask = np.isfinite(error_ratios) & (error_ratios > tol)
    orders[finite_mask] = np.log(error_ratios[finite_mask]) / np.log(
        h_ratios[finite_mask]
    )

    return orders


def assert_order_at_least(
    orders: np.ndarray,
    expected_order: float,
    tol: float = 0.1,
    err_msg: str = "",
    asymptotic: int | None = None,
) -> None:
    """Asserts that the average of the estimated orders are at least the expected order
    minus a tolerance.

    Order values of + infinity are treated as an exact approximation and counted as the
    expected order.

    Parameters:
        orders: Order values, as returned by :func:`get_EOC_taylor`.
        expected_order: The value of the expected (average) order value.
        tol: Tolerance for expected order for numerical reasons.
        err_msg: Appended to the assertion message.
        asymptotic: If given as an integer ``n``, only the last ``n`` values are
            checked.

    """
    orders = np.array(orders, dtype=float)
    if isinstance(asymptotic, int):
        orders = orders[-asymptotic:]

    if np.any(orders < 0):
        raise ValueError(f"Negative orders, method DIVERGENT: {err_msg}")
    if np.any(np.isnan(orders)):
        raise ValueError(f"Estimated orders contain NAN values: {err_msg}")

    # If order all inf, we have an exact approximation.
    if not np.all(np.isinf(orders)):
        orders[np.isinf(orders)] = expected_order
        order_avg = np.mean(orders)
        assert order_avg >= expected_order - tol, (
            f"Expected all orders to be at least {expected_order - tol}, "
            f"but got {order_avg}: {err_msg}"
        )
