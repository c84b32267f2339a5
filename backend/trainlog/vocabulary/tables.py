"""Static vocabulary tables mapping canonical values to surface phrases.

Each entry lists three tiers of matchers:

* ``phrases``: exact canonical wording, matched with ``high`` confidence.
* ``synonyms``: partial or alternate wording, matched with ``medium`` confidence.
* ``hints``: loose signals that only suggest the value, matched with ``low`` confidence.

Tables are module-level constants and are never mutated. New vocabulary is added
here without touching the extraction rules.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VocabularyEntry:
    """One canonical value and the phrases that point to it."""

    canonical: str
    phrases: tuple[str, ...]
    synonyms: tuple[str, ...] = ()
    hints: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FieldVocabulary:
    """Vocabulary for one field."""

    field: str
    entries: tuple[VocabularyEntry, ...]
    prefer_longest_match: bool = False

    def canonical_values(self) -> tuple[str, ...]:
        return tuple(entry.canonical for entry in self.entries)


POSITION_VOCABULARY = FieldVocabulary(
    field="position",
    prefer_longest_match=True,
    entries=(
        VocabularyEntry(
            "half guard bottom",
            phrases=("half guard bottom", "bottom half guard", "half guard from bottom", "half guard from the bottom"),
            synonyms=("knee shield half", "z guard", "playing half guard"),
        ),
        VocabularyEntry(
            "half guard top",
            phrases=("half guard top", "top half guard", "half guard from top", "half guard from the top"),
            synonyms=("passing half guard", "passing half"),
        ),
        VocabularyEntry("deep half guard", phrases=("deep half guard",), synonyms=("deep half",)),
        VocabularyEntry("half guard", phrases=("half guard",)),
        VocabularyEntry("closed guard", phrases=("closed guard", "full guard"), synonyms=("guard bottom",)),
        VocabularyEntry(
            "open guard",
            phrases=("open guard",),
            synonyms=("spider guard", "lasso guard", "collar sleeve", "collar and sleeve"),
            hints=("guard retention", "playing guard"),
        ),
        VocabularyEntry("butterfly guard", phrases=("butterfly guard",), synonyms=("butterfly hooks",)),
        VocabularyEntry("de la riva guard", phrases=("de la riva guard", "de la riva"), synonyms=("dlr",)),
        VocabularyEntry("single leg x", phrases=("single leg x", "single leg x guard"), synonyms=("slx",)),
        VocabularyEntry(
            "side control bottom",
            phrases=("side control bottom", "bottom side control", "side control from bottom", "under side control"),
            synonyms=("stuck under side control", "pinned in side control"),
        ),
        VocabularyEntry(
            "side control top",
            phrases=("side control top", "top side control", "side control from top"),
            synonyms=("side control", "cross side"),
        ),
        VocabularyEntry(
            "mount bottom",
            phrases=("mount bottom", "bottom mount", "mount from bottom", "under mount"),
            synonyms=("got mounted", "stuck under mount"),
        ),
        VocabularyEntry(
            "mount top",
            phrases=("mount top", "top mount", "mount from top"),
            synonyms=("mount", "mounted position"),
        ),
        VocabularyEntry(
            "back control",
            phrases=("back control", "back mount", "rear mount"),
            synonyms=("back take", "back takes", "taking the back", "took the back", "seatbelt", "back attacks"),
        ),
        VocabularyEntry("turtle", phrases=("turtle",), synonyms=("turtled", "turtling")),
        VocabularyEntry("north south", phrases=("north south",)),
        VocabularyEntry("knee on belly", phrases=("knee on belly", "knee on stomach"), synonyms=("knee ride",)),
        VocabularyEntry(
            "standing",
            phrases=("standing exchanges", "stand up"),
            synonyms=("takedown exchanges", "from the feet", "on the feet"),
            hints=("wrestling",),
        ),
    ),
)

TECHNIQUE_VOCABULARY = FieldVocabulary(
    field="technique",
    entries=(
        VocabularyEntry("knee cut pass", phrases=("knee cut pass", "knee slice pass"), synonyms=("knee cut", "knee slice")),
        VocabularyEntry("toreando pass", phrases=("toreando pass", "torreando pass"), synonyms=("toreando", "bullfighter pass")),
        VocabularyEntry("cross collar choke", phrases=("cross collar choke",), synonyms=("cross choke", "collar choke")),
        VocabularyEntry("armbar", phrases=("armbar", "arm bar", "juji gatame")),
        VocabularyEntry("triangle choke", phrases=("triangle choke",), synonyms=("triangle",)),
        VocabularyEntry("guillotine", phrases=("guillotine", "guillotine choke")),
        VocabularyEntry("kimura", phrases=("kimura",)),
        VocabularyEntry("americana", phrases=("americana",)),
        VocabularyEntry("omoplata", phrases=("omoplata",)),
        VocabularyEntry("rear naked choke", phrases=("rear naked choke",), synonyms=("rnc",)),
        VocabularyEntry("scissor sweep", phrases=("scissor sweep",)),
        VocabularyEntry("hip bump sweep", phrases=("hip bump sweep",), synonyms=("hip bump",)),
        VocabularyEntry("flower sweep", phrases=("flower sweep", "pendulum sweep")),
        VocabularyEntry("single leg takedown", phrases=("single leg takedown",), synonyms=("single leg",)),
        VocabularyEntry("double leg takedown", phrases=("double leg takedown",), synonyms=("double leg",)),
        VocabularyEntry("hip escape", phrases=("hip escape",), synonyms=("shrimp", "shrimping")),
        VocabularyEntry("upa escape", phrases=("upa escape",), synonyms=("bridge and roll", "upa")),
        VocabularyEntry("guard pass", phrases=("guard pass",), hints=("passing",)),
    ),
)

OUTCOME_VOCABULARY = FieldVocabulary(
    field="outcome",
    entries=(
        VocabularyEntry(
            "submission finish",
            phrases=("got the tap", "got the finish", "finished the submission"),
            synonyms=("finished", "submitted him", "submitted her", "submitted them", "tapped him", "tapped her"),
        ),
        VocabularyEntry(
            "got submitted",
            phrases=("got submitted", "got tapped", "tapped out"),
            synonyms=("had to tap",),
        ),
        VocabularyEntry(
            "sweep success",
            phrases=("hit the sweep", "landed the sweep", "completed the sweep"),
            synonyms=("swept", "swept him", "swept her", "swept them"),
        ),
        VocabularyEntry("swept", phrases=("got swept",), synonyms=("kept getting swept",)),
        VocabularyEntry(
            "guard pass success",
            phrases=("passed the guard", "passed his guard", "passed her guard"),
            synonyms=("passed",),
        ),
        VocabularyEntry("guard passed", phrases=("got passed", "guard got passed"), synonyms=("kept getting passed",)),
        VocabularyEntry(
            "escape success",
            phrases=("escaped mount", "escaped side control", "escaped the back", "escaped back control"),
            synonyms=("escaped",),
        ),
        VocabularyEntry(
            "stalled attack",
            phrases=("stalled attack",),
            synonyms=("stalled", "could not finish", "couldn't finish", "couldnt finish"),
        ),
        VocabularyEntry("positive session", phrases=("good session",), hints=("went well", "felt good")),
        VocabularyEntry("tough session", phrases=("tough session",), hints=("rough day", "struggled")),
    ),
)

CONCEPT_VOCABULARY = FieldVocabulary(
    field="concepts",
    entries=(
        VocabularyEntry("frames", phrases=("frame", "frames", "framing")),
        VocabularyEntry("underhook", phrases=("underhook", "underhooks")),
        VocabularyEntry("inside position", phrases=("inside position",)),
        VocabularyEntry("timing", phrases=("timing",)),
        VocabularyEntry("distance management", phrases=("distance management", "managing distance")),
        VocabularyEntry("hip line", phrases=("hip line",)),
        VocabularyEntry("posture", phrases=("posture",)),
        VocabularyEntry("head position", phrases=("head position",)),
        VocabularyEntry("base", phrases=("base",)),
        VocabularyEntry("pummeling", phrases=("pummel", "pummeling")),
        VocabularyEntry("grip fighting", phrases=("grip fighting", "grip fight")),
        VocabularyEntry("pressure", phrases=("pressure", "shoulder pressure")),
    ),
)

FAILURE_VOCABULARY = FieldVocabulary(
    field="failures",
    entries=(
        VocabularyEntry("guard passed", phrases=("got passed", "kept getting passed", "guard got passed")),
        VocabularyEntry("swept", phrases=("got swept", "kept getting swept")),
        VocabularyEntry("lost underhook", phrases=("lost underhook", "lost the underhook", "lost my underhook")),
        VocabularyEntry("lost posture", phrases=("lost posture", "lost my posture", "posture got broken", "got broken down")),
        VocabularyEntry("got flattened", phrases=("got flattened", "flattened out")),
        VocabularyEntry("got taken down", phrases=("got taken down", "got double legged", "got single legged")),
        VocabularyEntry("got submitted", phrases=("got submitted", "got tapped", "tapped out")),
        VocabularyEntry("overcommitted", phrases=("overcommitted", "over committed", "overcommitting")),
        VocabularyEntry("failed finish", phrases=("could not finish", "couldn't finish", "failed to finish")),
    ),
)

CONDITIONING_VOCABULARY = FieldVocabulary(
    field="conditioning_issues",
    entries=(
        VocabularyEntry(
            "cardio fatigue",
            phrases=("gassed", "gassed out", "gas tank", "out of breath", "cardio", "winded", "blew up"),
        ),
        VocabularyEntry(
            "grip fatigue",
            phrases=("forearm pump", "forearms pumped", "grip fatigue", "grips gave out", "grip was gone", "forearms were fried"),
        ),
        VocabularyEntry("reaction speed drop", phrases=("slow reaction", "late reaction", "reactions were slow")),
        VocabularyEntry("hip mobility fatigue", phrases=("hips heavy", "hips felt heavy", "heavy hips", "hip felt heavy")),
        VocabularyEntry("leg fatigue", phrases=("dead legs", "legs were dead", "heavy legs", "legs felt heavy")),
    ),
)

# Markers that introduce an explicit coaching cue. Strong markers give ``high``
# confidence, soft markers ``medium``.
CUE_STRONG_MARKERS: tuple[str, ...] = ("cue", "key cue", "coaching cue", "coach cue")
CUE_SOFT_MARKERS: tuple[str, ...] = ("focus on", "remember to", "next time", "one thing", "key point")

# Markers that introduce a problem statement.
PROBLEM_MARKERS: tuple[str, ...] = (
    "problem was",
    "issue was",
    "kept getting",
    "kept losing",
    "couldn't",
    "could not",
    "failed to",
    "struggled to",
    "struggled with",
)
