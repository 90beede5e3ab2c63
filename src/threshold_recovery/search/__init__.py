from .consistency import ConsistencySearch, ReconstructionResult, candidate_subsets, default_tolerance

__all__ = ["ConsistencySearch", "ReconstructionResult", "candidate_subsets", "default_tolerance"]
