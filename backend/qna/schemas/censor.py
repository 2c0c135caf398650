"""
QnA Backend — Censor API Result Schemas
=========================================

What:  Typed shapes of the bad-words API responses.
How:   The API answers either with a result object or with an error object
       (`{"message": ...}`) and no discriminator field. BadWordsService tries
       CensorResult first, then APIErrorPayload, and treats a body matching
       neither as a deserialization failure.

Span editing:
    Each detected word carries its [start, end) character span in the
    original text. `apply()` censors spans again with the censor character
    and `restore()` puts the original words back, so callers can whitelist
    individual terms without another API round-trip.
"""

from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BadWord(BaseModel):
    """One flagged term reported by the API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    original: str = Field(description="The term as it appears in the text")
    word: str = Field(default="", description="Dictionary word it matched")
    deviations: int = 0
    info: int = 0
    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)
    replaced_len: int = Field(default=0, alias="replacedLen")


WordPredicate = Callable[[BadWord], bool]


class CensorResult(BaseModel):
    """
    Successful response of the bad-words API.

    Not persisted; the store keeps only `censored_content`.
    """
    model_config = ConfigDict(extra="ignore")

    content: str
    bad_words_total: int = 0
    bad_words_list: List[BadWord] = Field(default_factory=list)
    censored_content: str
    censor_character: str = Field(default="*", min_length=1, max_length=1)

    @model_validator(mode="after")
    def _sort_spans(self) -> "CensorResult":
        self.bad_words_list.sort(key=lambda word: word.start)
        return self

    def apply(self, predicate: Optional[WordPredicate] = None) -> str:
        """
        Censor the spans of the words matching `predicate` (all when None).

        Each span [start, end) becomes `end - start` censor characters, so
        positions of the other spans do not move.

        Returns:
            The updated `censored_content`.
        """
        text = self.censored_content
        for word in self.bad_words_list:
            if predicate is None or predicate(word):
                filler = self.censor_character * (word.end - word.start)
                text = text[:word.start] + filler + text[word.end:]
        self.censored_content = text
        return text

    def restore(self, predicate: Optional[WordPredicate] = None) -> str:
        """
        Put back the original text of the words matching `predicate` (all when None).

        Works from the last span backwards: an original whose length differs
        from its span would otherwise shift every span after it.

        Returns:
            The updated `censored_content`.
        """
        text = self.censored_content
        for word in reversed(self.bad_words_list):
            if predicate is None or predicate(word):
                text = text[:word.start] + word.original + text[word.end:]
        self.censored_content = text
        return text


class APIErrorPayload(BaseModel):
    """Error response of the bad-words API."""
    message: str
