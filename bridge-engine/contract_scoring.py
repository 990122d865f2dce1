"""
Contract Scoring
Duplicate bridge score for a finished board

- Trick score (below the line): 20 per minor trick, 30 per major trick,
  40 for the first no-trump trick and 30 after; doubled x2, redoubled x4
- Overtricks: trick value undoubled, 100/200 doubled, 200/400 redoubled
- Insult bonus: 50 doubled, 100 redoubled
- Part-score 50, game 300 (not vulnerable) / 500 (vulnerable)
- Slams: small 500/750, grand 1000/1500
- Undertricks: 50/100 each undoubled; doubled and redoubled sliding scale
"""

TRICK_VALUES = {'C': 20, 'D': 20, 'H': 30, 'S': 30, 'NT': 30}


def trick_score(level, strain, multiplier=1):
    """Points below the line for the tricks bid"""
    if strain == 'NT':
        base_points = 40 + (level - 1) * 30
    else:
        base_points = level * TRICK_VALUES[strain]
    return base_points * multiplier


def score_contract(contract, tricks_made, vulnerable):
    """
    Calculate the duplicate score of a completed board.

    Args:
        contract: auction_state.Contract
        tricks_made: tricks won by the declaring partnership (0-13)
        vulnerable: whether the declaring side is vulnerable

    Returns:
        dict with scoring breakdown; 'declarer_score' is signed from the
        declaring side's point of view
    """
    strain = contract.strain.value
    multiplier = contract.doubling.multiplier
    partnership = contract.declaring_side.value
    tricks_needed = contract.required_tricks

    if tricks_made < tricks_needed:
        return _calculate_penalty(tricks_needed - tricks_made, vulnerable, multiplier, partnership)
    return _calculate_made_contract(contract.level, strain, tricks_made - tricks_needed,
                                    vulnerable, multiplier, partnership)


def _calculate_made_contract(level, strain, overtricks, vulnerable, multiplier, partnership):
    """Calculate score for a made contract"""
    below_line = trick_score(level, strain, multiplier)

    above_line = 0
    if overtricks > 0:
        if multiplier > 1:
            overtrick_value = (200 if vulnerable else 100) * (multiplier // 2)
            above_line += overtricks * overtrick_value
        else:
            above_line += overtricks * TRICK_VALUES[strain]

    # Insult bonus
    if multiplier == 2:
        above_line += 50
    elif multiplier == 4:
        above_line += 100

    makes_game = below_line >= 100
    if makes_game:
        above_line += 500 if vulnerable else 300
    else:
        above_line += 50

    if level == 6:
        above_line += 750 if vulnerable else 500
    elif level == 7:
        above_line += 1500 if vulnerable else 1000

    total = below_line + above_line
    description = f"{level}{strain} made"
    if overtricks > 0:
        description += f" with {overtricks} overtrick(s)"

    return {
        'partnership': partnership,
        'below_line': below_line,
        'above_line': above_line,
        'total': total,
        'declarer_score': total,
        'makes_game': makes_game,
        'overtricks': overtricks,
        'undertricks': 0,
        'vulnerable': vulnerable,
        'description': description,
    }


def _calculate_penalty(undertricks, vulnerable, multiplier, declarer_partnership):
    """Calculate penalty for a defeated contract"""
    defender_partnership = 'EW' if declarer_partnership == 'NS' else 'NS'

    if multiplier == 1:
        penalty = undertricks * (100 if vulnerable else 50)
    else:
        penalty = 0
        for i in range(undertricks):
            if i == 0:
                penalty += 200 if vulnerable else 100
            elif i in [1, 2]:
                penalty += 300 if vulnerable else 200
            else:
                penalty += 300
        if multiplier == 4:
            penalty *= 2

    doubling = {1: '', 2: ' doubled', 4: ' redoubled'}[multiplier]
    return {
        'partnership': defender_partnership,
        'below_line': 0,
        'above_line': penalty,
        'total': penalty,
        'declarer_score': -penalty,
        'makes_game': False,
        'overtricks': 0,
        'undertricks': undertricks,
        'vulnerable': vulnerable,
        'description': f"Down {undertricks}{doubling}",
    }
