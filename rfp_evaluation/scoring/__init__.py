"""
scoring/ - Evaluation consensus engine

Modules:
    utils.py                  - Decimal utilities
    rubric_validator.py       - Rubric weight/scale validation
    score_recorder.py         - All-or-nothing evaluator submissions
    consensus_calculator.py   - Per-criterion consensus and overall score
    lifecycle.py              - Quorum-gated status machine and finalization
    visibility.py             - Blind-evaluation identity gate
"""
