"""
Minimal training entry point: fit an MLP to a toy dataset with plain SGD.

Usage:
    scalargrad-train --epochs 50 --lr 0.01 --seed 0
"""

import argparse
import logging

import numpy as np

from scalargrad.engine import InvalidArgument, Value
from scalargrad.nn import MLP

logger = logging.getLogger(__name__)

# Four 2-feature samples with +1/-1 targets
TOY_XS = [
    [2.0, 3.0],
    [3.0, -1.0],
    [0.5, 1.0],
    [1.0, -1.0],
]
TOY_YS = [1.0, -1.0, -1.0, 1.0]


def mse_loss(predictions, targets):
    """
    Sum of squared errors between predicted Values and numeric targets.

    Always returns a Value; with no samples it is a 0.0 leaf.
    """
    if len(predictions) != len(targets):
        raise InvalidArgument(
            f"Got {len(predictions)} predictions for {len(targets)} targets"
        )
    return sum(((yp - yt) ** 2 for yp, yt in zip(predictions, targets)), Value(0.0))


def sgd_step(params, lr):
    for p in params:
        p.data -= lr * p.grad


def train(model, xs, ys, epochs=20, lr=0.01):
    """
    Train model on (xs, ys) with full-batch gradient descent.

    Args:
        model: A Module whose __call__ maps one sample to a single Value
        xs: List of input samples
        ys: List of numeric targets
        epochs: Number of passes over the data
        lr: Learning rate

    Returns:
        list: The loss value of each epoch, before that epoch's update
    """
    history = []
    for epoch in range(epochs):
        loss = mse_loss([model(x) for x in xs], ys)

        model.zero_grad()
        loss.backward()
        sgd_step(model.parameters(), lr)

        history.append(float(loss.data))
        logger.info("[Epoch %d] loss: %.6f", epoch + 1, loss.data)
    return history


def build_parser():
    parser = argparse.ArgumentParser(description="Train a small MLP with scalargrad.")
    parser.add_argument("--epochs", type=int, default=20)
    parser.add_argument("--lr", type=float, default=0.01)
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for parameter initialization")
    parser.add_argument("--hidden", type=int, nargs="+", default=[16, 16],
                        help="hidden layer sizes")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    mlp = MLP(2, args.hidden + [1], rng=np.random.default_rng(args.seed))
    logger.info("MLP: %s", mlp)
    logger.info("The number of parameters is: %d", len(mlp.parameters()))

    history = train(mlp, TOY_XS, TOY_YS, epochs=args.epochs, lr=args.lr)
    logger.info("Final predictions: %s", [float(mlp(x).data) for x in TOY_XS])
    return history


if __name__ == "__main__":
    main()
