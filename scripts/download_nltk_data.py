#!/usr/bin/env python3
"""
Downloads the NLTK data the lexicon backend can use for keywords.
Without it keywords still work, just without lemmas and word-class filtering.
Usage: python scripts/download_nltk_data.py
"""

import nltk

PACKAGES = [
    "wordnet",                          # lemmatizer
    "omw-1.4",                          # wordnet multilingual index
    "averaged_perceptron_tagger_eng",   # pos_tag (nltk >= 3.9)
    "averaged_perceptron_tagger",       # pos_tag (older nltk)
]


def download():
    print("--- NLTK data setup ---")
    failed = []
    for package in PACKAGES:
        ok = nltk.download(package, quiet=True)
        print(f"{'✅' if ok else '❌'} {package}")
        if not ok:
            failed.append(package)

    if failed:
        print(f"\nSome packages could not be downloaded: {', '.join(failed)}")
    else:
        print("\n✅ Lexicon backend will lemmatize and filter keywords by word class.")


if __name__ == "__main__":
    download()
