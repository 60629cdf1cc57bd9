"""
Float Stability Error Taxonomy

Classify scenario failures in plain language (for reports and CI logs).

Failures fall into 4 categories, each with:
- severity: 'critical' | 'high' | 'medium'
- pattern: What went wrong numerically
- impact: What it means for equality-sensitive logic built on the computation

Determinism failures and accuracy failures are different bug classes and are
never merged into a single category.
"""


class ContractViolation(ValueError):
    """Raised when a caller supplies an invalid parameter (programming error)."""
    pass


class FailureTaxonomy:
    """Map scenario outcomes to reportable failure categories."""

    CATEGORIES = {
        'failed_determinism': {
            'severity': 'critical',
            'pattern': 'Identical inputs produced outputs with different bit patterns',
            'example': 'powf(1.618, pi) returned ...895 on one call and ...896 on the next',
            'impact': 'Environment is not reproducible; replicas can disagree on balances'
        },
        'non_finite': {
            'severity': 'high',
            'pattern': 'Computation produced NaN or infinity',
            'example': 'float32 max * 2.0 overflowed to inf; sqrt(-1.0) produced NaN',
            'impact': 'Value cannot be compared or stored; every tolerance check fails'
        },
        'failed_error': {
            'severity': 'high',
            'pattern': 'Computation raised an error instead of returning a value',
            'example': 'Fixed-point conversion overflowed the exact integer range',
            'impact': 'Scenario produced no value; conversion range or inputs need review'
        },
        'failed_tolerance': {
            'severity': 'medium',
            'pattern': 'Deterministic output outside the declared tolerance of the reference',
            'example': 'Accumulated sum 99.9990 vs reference 100.0 with tolerance 1e-6',
            'impact': 'Result is stable but numerically wrong for the declared policy'
        }
    }

    @classmethod
    def classify(cls, category: str) -> dict:
        """
        Retrieve category info for a failure.

        Args:
            category: One of the category keys

        Returns:
            Dict with severity, pattern, example, impact
        """
        if category in cls.CATEGORIES:
            return cls.CATEGORIES[category]
        return {
            'severity': 'unknown',
            'pattern': 'Unknown failure category',
            'example': '',
            'impact': 'See logs for details'
        }

    @classmethod
    def category_for(cls, result) -> str | None:
        """
        Pick the category that explains a ScenarioResult, or None if it passed.

        NaN/inf outputs that are otherwise deterministic are reported as
        'non_finite' rather than as a plain tolerance miss.
        """
        if result.passed:
            return None
        state = result.state.value
        if state == 'failed_tolerance' and result.non_finite:
            return 'non_finite'
        return state

    @classmethod
    def all_categories(cls) -> list:
        """Return list of all failure category names."""
        return list(cls.CATEGORIES.keys())

    @classmethod
    def severity_level(cls, category: str) -> str:
        """Get severity of a failure category."""
        return cls.classify(category).get('severity', 'unknown')
