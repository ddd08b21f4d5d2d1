# con_reentrant_reward_hook.py
I = importlib

token_contract = Variable()
hook_owner = Variable() # To control sensitive operations

# Re-entrancy specific state
re_entry_amount = Variable()
re_entry_attempt_count = Variable()
re_entry_max_attempts = Variable() # To prevent infinite loops
rewards_received = Variable()

@construct
def seed():
    re_entry_amount.set(0)
    re_entry_attempt_count.set(0)
    re_entry_max_attempts.set(1) # Only re-enter once
    rewards_received.set(0)
    hook_owner.set(ctx.caller)

@export
def configure(token: str, amount: int):
    assert ctx.caller == hook_owner.get(), "Only owner can configure the hook."
    token_contract.set(token)
    re_entry_amount.set(amount)
    re_entry_attempt_count.set(0)

    # ctx.caller inside the token is this contract, so the hook is registered for ctx.this
    I.import_module(token).register_reward_hook(hook=ctx.this)

@export
def on_reward(amount: int):
    assert ctx.caller == token_contract.get(), "Only the configured token can notify this hook."
    rewards_received.set(rewards_received.get() + amount)

    current_attempts = re_entry_attempt_count.get()
    if re_entry_amount.get() > 0 and current_attempts < re_entry_max_attempts.get():
        re_entry_attempt_count.set(current_attempts + 1)
        token = I.import_module(token_contract.get())
        # Re-enter distribute_reward while the outer distribution still holds the guard.
        token.distribute_reward(user=ctx.this, amount=re_entry_amount.get())

    return True

@export
def get_rewards_received():
    return rewards_received.get()
