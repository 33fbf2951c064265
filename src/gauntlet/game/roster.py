"""Default roster and round schedule."""

from __future__ import annotations

from gauntlet.game.models import Contestant, Round, Stats

# (id, name, personality, trait, description, str, agi, int, dec, luck)
DEFAULT_ROSTER = [
    ("jihoon", "Jihoon", "Cautious", "Survivor",
     "Avoids risks, prefers alliances. A former office worker who thinks three steps ahead.",
     5, 4, 8, 3, 6),
    ("minseo", "Minseo", "Ambitious", "Opportunist",
     "Seizes chances, may betray others. A business executive who sees every situation as a deal.",
     6, 6, 9, 8, 5),
    ("daejung", "Daejung", "Loyal", "Protector",
     "Shields allies, risks self for others. A former soldier with an unbreakable moral code.",
     9, 7, 6, 2, 4),
    ("hana", "Hana", "Calculating", "Strategist",
     "Plans ahead, manipulates situations. A chess master who treats life like a game.",
     4, 5, 10, 7, 6),
    ("sunwoo", "Sunwoo", "Reckless", "Daredevil",
     "Takes big risks, high reward or failure. A former stunt performer who lives for adrenaline.",
     7, 9, 4, 5, 8),
    ("sora", "Sora", "Empathetic", "Peacemaker",
     "Tries to resolve conflicts, avoids violence. A social worker who believes in human goodness.",
     3, 5, 7, 2, 7),
    ("kyung", "Kyung", "Aggressive", "Challenger",
     "Instigates duels, confronts threats. A former gang member who solves problems with force.",
     10, 8, 5, 6, 5),
    ("yuna", "Yuna", "Lucky", "Fortunate",
     "Random events often favor her. A lottery winner who seems to have fate on her side.",
     5, 6, 6, 4, 10),
    ("taemin", "Taemin", "Deceptive", "Liar",
     "Bluffs, deceives, and manipulates others. A con artist who can make anyone believe anything.",
     4, 6, 8, 10, 6),
    ("mira", "Mira", "Resourceful", "Improviser",
     "Adapts quickly, uses environment well. A street-smart survivor who makes the most of any situation.",
     6, 8, 7, 6, 7),
]

# (name, kind, description, elimination_count)
DEFAULT_SCHEDULE = [
    ("Red Light, Green Light", "red_light_green_light",
     "Players must reach the finish line while a giant doll is facing away. "
     "When it turns around, anyone still moving is eliminated.", 2),
    ("Tug of War", "tug_of_war",
     "Teams of contestants compete in tug of war. The losing team falls.", 3),
    ("Marbles", "marbles",
     "Contestants pair up and play marble games. The loser of each pair is eliminated.", 2),
    ("Glass Bridge", "glass_bridge",
     "Players must cross a bridge of glass panels. Some are tempered, others shatter.", 1),
    ("Squid Game", "final",
     "The final contestants face off in the traditional playground game.", 1),
]


def default_contestants() -> list[Contestant]:
    """Fresh contestant objects (all alive) for a new game."""
    return [
        Contestant(
            id=cid,
            name=name,
            personality=personality,
            trait=trait,
            description=description,
            stats=Stats(
                strength=strength,
                agility=agility,
                intelligence=intelligence,
                deception=deception,
                luck=luck,
            ),
        )
        for (cid, name, personality, trait, description,
             strength, agility, intelligence, deception, luck) in DEFAULT_ROSTER
    ]


def default_rounds() -> list[Round]:
    return [
        Round(number=i, name=name, kind=kind, description=description,
              elimination_count=count)
        for i, (name, kind, description, count) in enumerate(DEFAULT_SCHEDULE, start=1)
    ]
