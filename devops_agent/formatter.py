"""Formatting of generator explanations into display blocks"""
import re

from .models import Heading, BulletItem, Paragraph, Segment

EMPHASIS = '**'
STEP_HEADING = re.compile(r'\*\*Step \d+:.*\*\*')
EMPHASIS_SPAN = re.compile(r'\*\*(.*?)\*\*')
EMPHASIS_SPLIT = re.compile(r'(\*\*.*?\*\*)')


def format_explanation(text):
    """Convert explanation text into an ordered list of display blocks.

    Each line is classified on its own, first match wins:

    1. ``**Step N: ...**`` spanning the whole line becomes a Heading.
    2. A line starting with ``* `` becomes a BulletItem; the first
       ``**...**`` span, if any, is its emphasized prefix.
    3. A line with any ``**...**`` span becomes a Paragraph split into
       plain and emphasized segments.
    4. Anything else becomes a single-segment plain Paragraph.
    """
    if not text:
        return []
    return [format_line(line) for line in text.split('\n')]


def format_line(line):
    """Classify a single explanation line"""
    if STEP_HEADING.fullmatch(line):
        return Heading(line.replace(EMPHASIS, ''))

    if line.startswith('* '):
        match = EMPHASIS_SPAN.search(line)
        if match:
            return BulletItem(line[match.end():], emphasized_prefix=match.group(1))
        return BulletItem(line[2:])

    if EMPHASIS_SPAN.search(line):
        return Paragraph(split_emphasis(line))

    return Paragraph([Segment(line)])


def split_emphasis(line):
    """Partition a line into alternating plain and emphasized segments.

    An unterminated marker stays in the plain text from the marker onward.
    """
    segments = []
    # re.split puts captured spans at odd indexes
    for index, part in enumerate(EMPHASIS_SPLIT.split(line)):
        if index % 2:
            segments.append(Segment(part[2:-2], emphasized=True))
        elif part:
            segments.append(Segment(part))
    return segments
