from .metrics import ClassificationMetrics, evaluate_scores

__all__ = ['ClassificationMetrics', 'evaluate_scores']
