#!/usr/bin/env python3
"""Check stored fit scores against the scoring rules.

This script will:
- iterate rows in evaluations
- recompute score and classification from the stored answers
- report rows whose stored values differ or whose answers are out of range

Nothing is written back; a stored score is what the candidate was shown.

Run from project root: python scripts/audit_fit_scores.py
"""
import logging
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fitscore import create_app
from fitscore.extensions import db
from fitscore.models.evaluation import Evaluation
from fitscore.services.scoring import InvalidInput, compute_fit_score

logger = logging.getLogger("fitscore.audit")


def audit(evaluations):
    """Return ``(total, drifted, invalid)`` where the last two are lists of ids."""
    total = 0
    drifted, invalid = [], []
    for ev in evaluations:
        total += 1
        try:
            result = compute_fit_score(ev.answers())
        except InvalidInput as e:
            logger.warning("Evaluation %s has invalid answers: %s", ev.id, e)
            invalid.append(ev.id)
            continue
        if result.score != ev.fit_score or result.classification.value != ev.fit_classification:
            logger.warning(
                "Evaluation %s stored %s/%s, recomputed %s/%s",
                ev.id, ev.fit_score, ev.fit_classification, result.score, result.classification.value,
            )
            drifted.append(ev.id)
    return total, drifted, invalid


def main():
    app = create_app()
    with app.app_context():
        rows = db.session.scalars(db.select(Evaluation).order_by(Evaluation.id))
        total, drifted, invalid = audit(rows)
        logger.info("Audited %d evaluations: %d drifted, %d invalid", total, len(drifted), len(invalid))
    return 1 if drifted or invalid else 0


if __name__ == '__main__':
    sys.exit(main())
