I = importlib

ZERO_ADDRESS = '0' * 64
BASIS_POINTS = 10000
MAX_TAX_RATE = 500 # 5%
INITIAL_SUPPLY = 100000000 * 10 ** 18

ADMIN_ROLE = 'ADMIN_ROLE'
REWARD_MANAGER_ROLE = 'REWARD_MANAGER_ROLE'
KNOWN_ROLES = [ADMIN_ROLE, REWARD_MANAGER_ROLE]

# Storage layout is append-only: the proxy keeps raw state across implementation
# swaps, so new fields go below the last one and nothing here is renamed or removed.
balances = Hash(default_value=0)
approvals = Hash(default_value=0)
total_supply = Variable(default_value=0)
tax_rate = Variable(default_value=0)
reward_pool = Variable(default_value=0)
roles = Hash(default_value=False)
contract_owner = Variable()
reentrancyGuardActive = Variable(default_value=False)
initialized = Variable(default_value=False)
reward_hooks = Hash()

reward_hook_interface = [
    I.Func('on_reward', args=('amount',)),
]

# Events
Transfer = LogEvent(
    event="Transfer",
    params={
        "from": {'type': str, 'idx': True},
        "to": {'type': str, 'idx': True},
        "amount": {'type': (int, float, decimal)}
    })

Approval = LogEvent(
    event="Approval",
    params={
        "owner": {'type': str, 'idx': True},
        "spender": {'type': str, 'idx': True},
        "amount": {'type': (int, float, decimal)}
    })

RewardDistributed = LogEvent(
    event="RewardDistributed",
    params={
        "user": {'type': str, 'idx': True},
        "amount": {'type': (int, float, decimal)}
    })

TaxUpdated = LogEvent(
    event="TaxUpdated",
    params={
        "new_tax": {'type': (int, float, decimal)}
    })

RoleGranted = LogEvent(
    event="RoleGranted",
    params={
        "role": {'type': str, 'idx': True},
        "account": {'type': str, 'idx': True},
        "sender": {'type': str, 'idx': True}
    })

RoleRevoked = LogEvent(
    event="RoleRevoked",
    params={
        "role": {'type': str, 'idx': True},
        "account": {'type': str, 'idx': True},
        "sender": {'type': str, 'idx': True}
    })

OwnershipTransferred = LogEvent(
    event="OwnershipTransferred",
    params={
        "previous_owner": {'type': str, 'idx': True},
        "new_owner": {'type': str, 'idx': True}
    })


def is_null(address):
    return address is None or address == '' or address == ZERO_ADDRESS


def require_amount(amount):
    assert isinstance(amount, int) and not isinstance(amount, bool), \
        'InvalidAmount: amount must be an integer number of base units!'
    assert amount >= 0, 'InvalidAmount: amount cannot be negative!'


def require_rate(rate):
    assert isinstance(rate, int) and not isinstance(rate, bool) and rate >= 0, \
        'InvalidRate: tax rate must be a non-negative integer in basis points!'
    assert rate <= MAX_TAX_RATE, f'RateTooHigh: tax rate {rate} exceeds {MAX_TAX_RATE} basis points!'


# --- Ledger ---
def credit(account: str, amount: int):
    balances[account] += amount


def debit(account: str, amount: int):
    balance = balances[account]
    assert balance >= amount, f'InsufficientBalance: {account} holds {balance}, needs {amount}!'
    balances[account] = balance - amount


def move(sender: str, receiver: str, amount: int):
    debit(sender, amount)
    credit(receiver, amount)
    Transfer({"from": sender, "to": receiver, "amount": amount})


def mint(account: str, amount: int):
    total_supply.set(total_supply.get() + amount)
    credit(account, amount)
    Transfer({"from": ZERO_ADDRESS, "to": account, "amount": amount})


def burn(account: str, amount: int):
    debit(account, amount)
    total_supply.set(total_supply.get() - amount)
    Transfer({"from": account, "to": ZERO_ADDRESS, "amount": amount})


# --- Tax engine ---
def compute_tax(amount: int, rate: int):
    # floor division; the net leg is always amount - tax
    return amount * rate // BASIS_POINTS


def apply_update(sender: str, receiver: str, amount: int):
    """
    Single choke point for every balance change. Mints and burns are untaxed,
    every other movement pays tax_rate into the reward pool held by ctx.this.
    """
    if is_null(sender):
        mint(receiver, amount)
        return
    if is_null(receiver):
        burn(sender, amount)
        return

    rate = tax_rate.get()
    if rate == 0:
        move(sender, receiver, amount)
        return

    sender_bal = balances[sender]
    assert sender_bal >= amount, f'InsufficientBalance: {sender} holds {sender_bal}, needs {amount}!'

    tax = compute_tax(amount, rate)
    net = amount - tax

    if tax > 0:
        move(sender, ctx.this, tax)
        reward_pool.set(reward_pool.get() + tax)

    move(sender, receiver, net)


# --- Access registry ---
def require_role(role: str, account: str):
    assert roles[role, account], f'Unauthorized: {account} does not hold {role}!'


def grant(role: str, account: str):
    if roles[role, account]:
        return
    roles[role, account] = True
    RoleGranted({"role": role, "account": account, "sender": ctx.caller})


def revoke(role: str, account: str):
    if not roles[role, account]:
        return
    roles[role, account] = False
    RoleRevoked({"role": role, "account": account, "sender": ctx.caller})


def require_known_role(role: str):
    assert role in KNOWN_ROLES, f'InvalidRole: unknown role {role}!'


# --- Ownership ---
def require_owner():
    assert ctx.caller == contract_owner.get(), 'Unauthorized: caller is not the owner!'


def set_owner(new_owner: str):
    previous_owner = contract_owner.get()
    if previous_owner is None:
        previous_owner = ZERO_ADDRESS
    contract_owner.set(new_owner)
    OwnershipTransferred({"previous_owner": previous_owner, "new_owner": new_owner})


# --- Reentrancy guard ---
def enter_guard():
    assert not reentrancyGuardActive.get(), 'ReentrancyDetected: reward distribution already in progress!'
    reentrancyGuardActive.set(True)


def exit_guard():
    reentrancyGuardActive.set(False)


@export
def initialize(treasury: str, initial_tax: int):
    assert not is_null(treasury), 'InvalidAddress: treasury cannot be the null address!'
    require_rate(initial_tax)
    assert not initialized.get(), 'AlreadyInitialized: contract is already initialized!'
    initialized.set(True)

    set_owner(ctx.caller)
    grant(ADMIN_ROLE, ctx.caller)
    grant(REWARD_MANAGER_ROLE, ctx.caller)

    tax_rate.set(initial_tax)
    apply_update(ZERO_ADDRESS, treasury, INITIAL_SUPPLY)


@export
def transfer(amount: int, to: str):
    require_amount(amount)
    assert not is_null(to), 'InvalidAddress: cannot transfer to the null address!'
    apply_update(ctx.caller, to, amount)
    return True


@export
def approve(amount: int, to: str):
    require_amount(amount)
    assert not is_null(to), 'InvalidAddress: cannot approve the null address!'
    approvals[ctx.caller, to] = amount
    Approval({"owner": ctx.caller, "spender": to, "amount": amount})
    return True


@export
def transfer_from(amount: int, to: str, main_account: str):
    require_amount(amount)
    assert not is_null(to), 'InvalidAddress: cannot transfer to the null address!'
    assert not is_null(main_account), 'InvalidAddress: cannot transfer from the null address!'

    spender = ctx.caller
    allowed = approvals[main_account, spender]
    assert allowed >= amount, \
        f'InsufficientAllowance: {spender} may spend {allowed} of {main_account}, needs {amount}!'
    approvals[main_account, spender] = allowed - amount

    apply_update(main_account, to, amount)
    return True


@export
def set_tax_rate(new_rate: int):
    require_owner()
    require_rate(new_rate)
    tax_rate.set(new_rate)
    TaxUpdated({"new_tax": new_rate})


@export
def distribute_reward(user: str, amount: int):
    require_role(REWARD_MANAGER_ROLE, ctx.caller)
    assert not is_null(user), 'InvalidAddress: cannot reward the null address!'
    require_amount(amount)
    pool = reward_pool.get()
    assert amount <= pool, f'InsufficientPool: pool holds {pool}, requested {amount}!'

    enter_guard()

    # pool is settled before any tokens leave ctx.this
    reward_pool.set(pool - amount)
    apply_update(ctx.this, user, amount)

    RewardDistributed({"user": user, "amount": amount})

    hook = reward_hooks[user]
    if hook:
        I.import_module(hook).on_reward(amount=amount)

    exit_guard()


@export
def register_reward_hook(hook: str):
    if is_null(hook):
        reward_hooks[ctx.caller] = None
        return

    hook_contract = I.import_module(hook)
    assert I.enforce_interface(hook_contract, reward_hook_interface), \
        f'InvalidHook: {hook} does not export on_reward(amount)!'
    reward_hooks[ctx.caller] = hook


@export
def grant_role(role: str, account: str):
    require_role(ADMIN_ROLE, ctx.caller)
    require_known_role(role)
    assert not is_null(account), 'InvalidAddress: cannot grant a role to the null address!'
    grant(role, account)


@export
def revoke_role(role: str, account: str):
    require_role(ADMIN_ROLE, ctx.caller)
    require_known_role(role)
    assert not is_null(account), 'InvalidAddress: cannot revoke a role from the null address!'
    revoke(role, account)


@export
def renounce_role(role: str):
    require_known_role(role)
    revoke(role, ctx.caller)


@export
def transfer_ownership(new_owner: str):
    require_owner()
    assert not is_null(new_owner), 'InvalidAddress: new owner cannot be the null address!'
    set_owner(new_owner)


@export
def authorize_upgrade(new_implementation: str):
    # Called by the proxy before it swaps code; the new implementation itself is not inspected.
    require_owner()
    return True


# --- Helper/View functions ---
@export
def balance_of(address: str):
    return balances[address]


@export
def allowance(owner: str, spender: str):
    return approvals[owner, spender]


@export
def get_total_supply():
    return total_supply.get()


@export
def get_tax_rate():
    return tax_rate.get()


@export
def get_reward_pool():
    return reward_pool.get()


@export
def get_owner():
    return contract_owner.get()


@export
def has_role(role: str, account: str):
    return roles[role, account]


@export
def is_initialized():
    return initialized.get()
