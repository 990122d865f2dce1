"""
Trick Estimators
How many tricks the declaring side takes in a simulated deal

An estimator is any object with estimate(hands, contract, rng) -> int.
PointCountEstimator is a quick approximation (combined HCP, trump length
and a little noise), not a double-dummy result; DoubleDummyEstimator in
dds_estimator.py plugs into the same seam.
"""


class PointCountEstimator:
    """Point-count + trump-length estimate with +/-1 trick of noise"""

    name = 'points'

    def __init__(self, noise=1):
        self.noise = noise

    def estimate(self, hands, contract, rng):
        declarer = contract.declarer
        dummy = contract.dummy
        combined = hands[declarer].hcp + hands[dummy].hcp

        tricks = 6 + combined // 4

        trump = contract.trump
        if trump is not None:
            fit = hands[declarer].length(trump) + hands[dummy].length(trump)
            if fit >= 8:
                tricks += fit - 7
        elif combined >= 25:
            tricks += 1

        if self.noise:
            tricks += rng.randint(-self.noise, self.noise)
        return max(0, min(13, tricks))


def make_estimator(name):
    """Build the estimator configured by name ('points' or 'dds')"""
    if name == 'points':
        return PointCountEstimator()
    if name == 'dds':
        # endplay is an optional extra; only needed when asked for
        from dds_estimator import DoubleDummyEstimator
        return DoubleDummyEstimator()
    raise ValueError(f"Unknown trick estimator: {name!r}")
