"""Fixed summary used when the language model is skipped or unavailable."""

from .models import SummaryResult


def mock_summary() -> SummaryResult:
    """Return a complete, realistic summary without calling any backend.

    The value already satisfies every summary invariant, so normalizing
    it returns an equal value.
    """
    return SummaryResult(
        short_summary=(
            "This is a service agreement between two companies establishing "
            "terms for consulting services."
        ),
        parties=[
            {
                "role": "Service Provider",
                "name": "Example Consulting LLC",
                "excerpt": "Example Consulting LLC, a Delaware limited liability company",
            },
            {
                "role": "Client",
                "name": "Business Corp",
                "excerpt": "Business Corp, a California corporation",
            },
        ],
        important_dates=[
            {
                "type": "Effective Date",
                "date": "2024-01-15",
                "excerpt": "This Agreement is effective as of January 15, 2024",
            },
            {
                "type": "Initial Term End",
                "date": "2025-01-15",
                "excerpt": "The initial term shall end on January 15, 2025",
            },
        ],
        obligations=[
            {
                "who": "Service Provider",
                "action": "Provide monthly consulting services as outlined in Exhibit A",
                "excerpt": "Provider shall deliver consulting services according to the scope in Exhibit A",
            },
            {
                "who": "Client",
                "action": "Pay invoices within 30 days of receipt",
                "excerpt": "Client agrees to pay all invoices within thirty (30) days",
            },
        ],
        payment_terms=(
            "Monthly invoicing with Net 30 payment terms. "
            "Late payments subject to 1.5% monthly interest."
        ),
        termination_clauses=(
            "Either party may terminate with 30 days written notice. "
            "Immediate termination allowed for material breach."
        ),
        governing_law="State of Delaware",
        risk_flags=[
            {
                "score": 4,
                "reason": "Broad indemnification clause may expose client to significant liability",
            },
            {
                "score": 2,
                "reason": "Standard limitation of liability clause limits provider exposure",
            },
        ],
        suggested_redactions=[],
        confidence_score=0.95,
    )
