from tipper import create_app
from tipper.models import CounterBet, Mask, Player, Season, Show, Tip
from tipper.utils.scoring import calculate_scores

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "Player": Player,
        "Season": Season,
        "Mask": Mask,
        "Show": Show,
        "Tip": Tip,
        "CounterBet": CounterBet,
        "calculate_scores": calculate_scores,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
