"""
Property-Based Tests Using Hypothesis

Tests mathematical invariants of the regularized incomplete beta function
and its inverse across randomly generated shapes and arguments: round trips,
the reflection symmetry, monotonicity and range bounds.
"""
import math                                                  # Closed forms
import pytest                                                # Testing framework
from hypothesis import given, strategies as st, assume, settings  # Property testing
from tsbandit.ibeta import (                                 # Functions under test
    beta_pdf,
    inverse_regularized_incomplete_beta,
    regularized_incomplete_beta,
)
from tsbandit.skew import skew_percentile                    # Runtime skew


# Custom strategies for bounded data generation
@st.composite
def shape_strategy(draw):                                   # Generate Beta shapes
    """Strategy for generating moderate Beta shape parameters."""  # Strategy purpose
    return draw(st.floats(min_value=0.5, max_value=50.0))   # Well-conditioned range


@st.composite
def unit_strategy(draw):                                    # Generate interior points
    """Strategy for generating points strictly inside (0, 1)."""  # Strategy purpose
    return draw(st.floats(min_value=0.001, max_value=0.999))  # Avoid extreme edges


class TestForwardProperties:                                # Test I_x(a, b) invariants
    """Property-based tests for the regularized incomplete beta function."""

    @given(unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=200, deadline=1000)
    def test_value_in_unit_interval(self, x, a, b):         # Test bounds
        """For any valid input, 0 <= I_x(a, b) <= 1."""     # Test purpose
        value = regularized_incomplete_beta(x, a, b)        # Evaluate CDF
        assert 0.0 <= value <= 1.0, f"I_{x}({a}, {b}) = {value} out of bounds"

    @given(unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=200, deadline=1000)
    def test_reflection_symmetry(self, x, a, b):            # Test symmetry
        """I_x(a, b) == 1 - I_{1-x}(b, a)."""               # Test purpose
        left = regularized_incomplete_beta(x, a, b)         # Direct evaluation
        right = 1.0 - regularized_incomplete_beta(1.0 - x, b, a)  # Reflected evaluation
        assert abs(left - right) < 1e-10, f"Symmetry broken at x={x}, a={a}, b={b}"

    @given(unit_strategy(), unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=200, deadline=1000)
    def test_monotone_in_x(self, x1, x2, a, b):             # Test ordering
        """If x1 < x2 then I_x1(a, b) <= I_x2(a, b)."""     # Test purpose
        assume(x1 != x2)                                    # Skip equal values
        lo, hi = min(x1, x2), max(x1, x2)                   # Order the pair
        # allow rounding noise where both values saturate
        assert regularized_incomplete_beta(lo, a, b) <= regularized_incomplete_beta(hi, a, b) + 1e-14

    @given(unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=100, deadline=1000)
    def test_density_non_negative(self, x, a, b):           # Test density sign
        """The Beta density is finite and non-negative inside (0, 1)."""
        density = beta_pdf(x, a, b)                         # Evaluate density
        assert density >= 0.0 and math.isfinite(density)


class TestInverseProperties:                                # Test quantile invariants
    """Property-based tests for the inverse regularized incomplete beta."""

    @given(unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=200, deadline=2000)
    def test_round_trip_from_x(self, x, a, b):              # Test inverse property
        """For any x with a non-degenerate CDF value, inverse(I_x(a, b)) ≈ x."""
        p = regularized_incomplete_beta(x, a, b)            # Forward evaluation
        assume(1e-6 < p < 1.0 - 1e-6)                       # Skip saturated tails
        reconstructed = inverse_regularized_incomplete_beta(p, a, b)  # Round trip
        assert abs(reconstructed - x) < 1e-9, f"Failed for x={x}, a={a}, b={b}"

    @given(unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=200, deadline=2000)
    def test_round_trip_from_p(self, p, a, b):              # Test residual
        """I_{inverse(p)}(a, b) ≈ p."""                     # Test purpose
        x = inverse_regularized_incomplete_beta(p, a, b)    # Quantile
        assert 0.0 <= x <= 1.0                              # Must be valid
        assert regularized_incomplete_beta(x, a, b) == pytest.approx(p, abs=1e-9)

    @given(unit_strategy(), unit_strategy(), shape_strategy(), shape_strategy())
    @settings(max_examples=100, deadline=2000)
    def test_inverse_monotone_in_p(self, p1, p2, a, b):     # Test ordering
        """If p1 < p2 then inverse(p1) <= inverse(p2)."""   # Test purpose
        assume(abs(p1 - p2) > 1e-6)                         # Skip near-equal values
        lo, hi = min(p1, p2), max(p1, p2)                   # Order the pair
        assert inverse_regularized_incomplete_beta(lo, a, b) <= inverse_regularized_incomplete_beta(hi, a, b)

    @given(unit_strategy(), shape_strategy())
    @settings(max_examples=100, deadline=2000)
    def test_symmetric_shapes_mirror(self, p, a):           # Test mirror
        """For a == b the quantile of p mirrors the quantile of 1 - p."""
        x = inverse_regularized_incomplete_beta(p, a, a)    # Lower quantile
        y = inverse_regularized_incomplete_beta(1.0 - p, a, a)  # Mirrored quantile
        assert x + y == pytest.approx(1.0, abs=1e-9)


class TestSkewProperties:                                   # Test runtime skew
    """Property-based tests for runtime-aware scoring."""  # Class purpose

    @given(unit_strategy(), st.floats(min_value=1e-3, max_value=1e6), st.floats(min_value=0.0, max_value=100.0))
    @settings(max_examples=100, deadline=1000)
    def test_known_runtime_below_unknown(self, p, runtime, bias):  # Test ordering
        """A known runtime never scores at or above an unknown one."""
        assert skew_percentile(p, runtime, bias) < skew_percentile(p, None, bias)

    @given(unit_strategy(), st.floats(min_value=1e-3, max_value=1e6), st.floats(min_value=1e-3, max_value=1e6))
    @settings(max_examples=100, deadline=1000)
    def test_faster_scores_at_least_as_high(self, p, r1, r2):  # Test runtime ordering
        """With equal percentile and bias, a shorter runtime scores at least as high."""
        fast, slow = min(r1, r2), max(r1, r2)               # Order runtimes
        assert skew_percentile(p, fast, 1.0) >= skew_percentile(p, slow, 1.0)
