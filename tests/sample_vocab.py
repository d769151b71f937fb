"""Shared vocabulary fixtures for quiz engine tests."""

from quiz.models import VocabularyEntry, WordRelationship
from quiz.vocabulary import VocabularyPool

WORLD = 'meadow'

# (id, word, definition, part_of_speech, tier, example_sentence, category)
TIER_ONE = [
    ('w01', 'vivid', 'bright and strong in color', 'adjective', 1,
     'The painting was full of vivid colors.', 'description'),
    ('w02', 'gentle', 'kind and soft in manner', 'adjective', 1,
     'She gave the puppy a gentle pat.', 'feeling'),
    ('w03', 'harsh', 'rough and unkind', 'adjective', 1,
     'The harsh wind stung our faces.', 'feeling'),
    ('w04', 'bright', 'giving off a lot of light', 'adjective', 1,
     'The bright sun made us squint.', 'description'),
    ('w05', 'wander', 'to walk without a clear direction', 'verb', 1,
     'We like to wander through the woods.', 'movement'),
    ('w06', 'roam', 'to travel freely over an area', 'verb', 1,
     'Wild horses roam across the plains.', 'movement'),
    ('w07', 'gather', 'to bring things together', 'verb', 1,
     'Please gather the apples into the basket.', 'action'),
    ('w08', 'scatter', 'to throw things in many directions', 'verb', 1,
     'The birds scatter when the cat appears.', 'action'),
    ('w09', 'meadow', 'a field of grass and flowers', 'noun', 1,
     'Cows grazed in the green meadow.', 'place'),
    ('w10', 'brook', 'a small stream of water', 'noun', 1,
     'We crossed the brook on stepping stones.', 'place'),
    ('w11', 'pebble', 'a small smooth stone', 'noun', 1,
     'He skipped a pebble across the pond.', 'thing'),
    ('w12', 'blossom', 'a flower on a tree or bush', 'noun', 1,
     'A pink blossom fell from the cherry tree.', 'thing'),
    ('w13', 'quickly', 'at a fast speed', 'adverb', 1,
     'The rabbit quickly hopped away.', 'manner'),
    ('w14', 'slowly', 'at a low speed', 'adverb', 1,
     'The turtle slowly crossed the path.', 'manner'),
    ('w15', 'quietly', 'making very little noise', 'adverb', 1,
     'The owl quietly watched from the branch.', 'manner'),
]

HIGHER_TIERS = [
    ('w16', 'luminous', 'full of or shedding light', 'adjective', 3,
     'The luminous moon lit the trail.', 'description'),
    ('w17', 'tranquil', 'free from disturbance; calm', 'adjective', 3,
     'The lake was tranquil at dawn.', 'feeling'),
    ('w18', 'turbulent', 'moving in an irregular, violent way', 'adjective', 4,
     'The turbulent river flooded the bank.', 'feeling'),
    ('w19', 'meander', 'to follow a winding course', 'verb', 4,
     'The stream continued to meander through the valley.', 'movement'),
    ('w20', 'ephemeral', 'lasting for a very short time', 'adjective', 5,
     'The rainbow was ephemeral and faded fast.', 'description'),
]

RELATIONSHIPS = [
    ('w01', 'w04', 'synonym'),
    ('w02', 'w03', 'antonym'),
    ('w03', 'w02', 'antonym'),
    ('w05', 'w06', 'synonym'),
    ('w07', 'w08', 'antonym'),
    ('w13', 'w14', 'antonym'),
    ('w17', 'w18', 'antonym'),
    ('w19', 'w05', 'synonym'),
]


def make_entry(row, world_id=WORLD) -> VocabularyEntry:
    wid, word, definition, pos, tier, sentence, category = row
    return VocabularyEntry(
        id=wid,
        word=word,
        definition=definition,
        part_of_speech=pos,
        difficulty_tier=tier,
        example_sentence=sentence,
        category=category,
        world_id=world_id,
    )


def make_words(rows=None):
    rows = TIER_ONE + HIGHER_TIERS if rows is None else rows
    return [make_entry(r) for r in rows]


def make_relationships(rows=None):
    rows = RELATIONSHIPS if rows is None else rows
    return [WordRelationship(word_id=a, related_word_id=b, relationship_type=t) for a, b, t in rows]


def make_pool(rows=None, relationships=None) -> VocabularyPool:
    return VocabularyPool(make_words(rows), make_relationships(relationships))


def vocabulary_payload():
    """Vocabulary as dicts, with nested relationships, for JSONL and API imports."""
    nested = {}
    for a, b, t in RELATIONSHIPS:
        nested.setdefault(a, []).append({'related_word_id': b, 'relationship_type': t})
    out = []
    for entry in make_words():
        d = entry.to_dict()
        if entry.id in nested:
            d['relationships'] = nested[entry.id]
        out.append(d)
    return out


class FixedRandom:
    """Stand-in RNG: random() returns a fixed value, other draws pick the first option."""

    def __init__(self, value=0.0):
        self.value = value

    def random(self):
        return self.value

    def randrange(self, start, stop=None):
        return start if stop is not None else 0

    def choice(self, seq):
        return seq[0]
