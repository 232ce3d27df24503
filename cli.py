#!/usr/bin/env python3
import argparse
import json
import logging
import sys

from faq_matcher.config import Settings
from faq_matcher.errors import FaqMatcherError
from faq_matcher.service import predict, train


def main(argv=None):
    # options shared by every subcommand, accepted after the subcommand name
    common=argparse.ArgumentParser(add_help=False)
    common.add_argument("--corpus")
    common.add_argument("--tokenizer")
    common.add_argument("--log-level")

    ap=argparse.ArgumentParser(description="FAQ matcher: train the TF-IDF model or answer a question")
    sub=ap.add_subparsers(dest="mode", required=True)
    sub.add_parser("train", parents=[common], help="rebuild the model from the corpus CSV")
    p=sub.add_parser("predict", parents=[common], help="match a question against the trained model")
    p.add_argument("-q","--query", required=True)
    p.add_argument("--threshold", type=float, default=None)
    args=ap.parse_args(argv)

    cfg=Settings.from_env()
    if args.corpus: cfg.corpus_path=args.corpus
    if args.tokenizer: cfg.tokenizer=args.tokenizer
    if getattr(args, "threshold", None) is not None: cfg.similarity_threshold=args.threshold
    logging.basicConfig(level=args.log_level or cfg.log_level,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.mode=="train":
            res=train(cfg)
        else:
            res=predict(cfg, args.query)
    except FaqMatcherError as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        return 1

    print(json.dumps({"success": True, **res.to_dict()}, ensure_ascii=False, indent=2))
    return 0

if __name__=="__main__":
    raise SystemExit(main())
