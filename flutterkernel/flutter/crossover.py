from flutterkernel.flutter.roots import CrossoverPoint


def detect_crossovers(history):
    """
    Walk through all pairs of neighboring velocity samples and find the roots whose damping changes its sign. Both
    samples need to be valid, an invalid sample in between breaks the continuity and no crossover is reported across it.
    The crossovers are returned in ascending order of V_lo.
    """
    crossovers = []
    for sample_lo, sample_hi in zip(history.samples[:-1], history.samples[1:]):
        if not (sample_lo.valid and sample_hi.valid):
            continue
        for root_lo, root_hi in zip(sample_lo.roots, sample_hi.roots):
            if root_lo.is_stable != root_hi.is_stable:
                crossovers.append(CrossoverPoint(root_lo.root_id, sample_lo.roots, sample_hi.roots))
    crossovers.sort(key=lambda crossover: (crossover.V_lo, crossover.root_id))
    return crossovers
